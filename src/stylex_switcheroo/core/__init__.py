"""
Core Package.

Contains the migration pipeline:
- Host layer (TSX parsing, declaration scanning, text edits)
- Style-template parser and style-model converter
- Interpolation classifier and decision engine
- Selector lowering passes
- Aggregation, wrapper planning and call-site rewriting
"""
