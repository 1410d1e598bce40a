"""
Tests for the import table.
"""

from stylex_switcheroo.core.host.imports import ImportBinding, collect_imports, styled_components_locals
from stylex_switcheroo.core.host.parser import parse_source

CODE = """\
import React, { useState as useLocal } from "react";
import * as tokens from "./tokens";
import type { Theme } from "./theme";
import { type Props, helper } from './helpers';
import styled, { css, keyframes as kf } from "styled-components";
import "./global.css";
const x = 1;
"""


def test_collect_imports():
  table = collect_imports(parse_source(CODE))
  assert table.lookup("React") == ImportBinding("React", "default", "react")
  assert table.lookup("useLocal") == ImportBinding("useLocal", "useState", "react")
  assert table.lookup("tokens") == ImportBinding("tokens", "*", "./tokens")
  assert table.lookup("Theme").is_type_only
  assert table.lookup("Props").is_type_only
  assert not table.lookup("helper").is_type_only
  assert table.lookup("helper").source == "./helpers"
  assert table.lookup("x") is None


def test_statements_and_queries():
  table = collect_imports(parse_source(CODE))
  assert [s.source for s in table.statements] == [
    "react",
    "./tokens",
    "./theme",
    "./helpers",
    "styled-components",
    "./global.css",
  ]
  assert table.statements[-1].bindings == []
  assert table.last_statement.source == "./global.css"
  assert table.local_for("styled-components", "keyframes") == "kf"
  assert table.local_for("react", "useEffect") is None
  assert [b.local for b in table.from_source("react")] == ["React", "useLocal"]


def test_styled_components_locals():
  table = collect_imports(parse_source(CODE))
  assert styled_components_locals(table) == {"styled": "styled", "css": "css", "keyframes": "kf"}


def test_no_styled_components():
  table = collect_imports(parse_source('import React from "react";\n'))
  assert styled_components_locals(table) == {}
  assert collect_imports(parse_source("const a = 1;\n")).last_statement is None
