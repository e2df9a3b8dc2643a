from reviver.analysis import extract_dependencies


def test_es_import_from_package():
    assert extract_dependencies("import React, { useState } from 'react';") == ["react"]


def test_relative_and_local_paths_are_excluded():
    content = "\n".join(
        [
            "import x from './local/mod'",
            "import y from '../up'",
            "const z = require('/abs/path')",
            "import home from '~/home'",
        ]
    )
    assert extract_dependencies(content) == []


def test_relative_import_alone_yields_nothing():
    assert extract_dependencies("import x from './local/mod'") == []


def test_scoped_package_collapses_to_first_segment():
    assert extract_dependencies("import x from '@scope/pkg/sub'") == ["@scope"]


def test_subpath_keeps_first_segment():
    assert extract_dependencies("import get from 'lodash/get'") == ["lodash"]


def test_require_calls():
    content = 'const express = require("express");\nconst fs = require( "fs" );'
    assert extract_dependencies(content) == ["express", "fs"]


def test_bare_python_imports_anchored_at_line_start():
    content = "import numpy as np\nimport os\n    import indented\nfrom typing import List\n"
    assert extract_dependencies(content, "python") == ["numpy", "os"]


def test_patterns_apply_in_fixed_order_with_duplicates_collapsed():
    content = "\n".join(
        [
            "const a = require('alpha')",
            "import beta from 'beta'",
            "import gamma",
            "import alpha from 'alpha'",
        ]
    )
    # All quoted imports first, then require() calls, then bare imports.
    assert extract_dependencies(content) == ["beta", "alpha", "gamma"]


def test_side_effect_import():
    assert extract_dependencies("import 'polyfill/auto'") == ["polyfill"]


def test_malformed_or_empty_text_yields_nothing():
    assert extract_dependencies("") == []
    assert extract_dependencies(None) == []
    assert extract_dependencies("require(\nimport {") == []


def test_extraction_is_deterministic():
    content = "import b from 'b'\nimport a from 'a'\nrequire('c')"
    assert extract_dependencies(content) == extract_dependencies(content) == ["b", "a", "c"]
