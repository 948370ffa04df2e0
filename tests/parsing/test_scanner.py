"""Tests for parsing/scanner.py module.

Covers:
- strip_comments()
- match_header() / match_field() / match_value()
- step() state transitions
- scan() over whole units: kinds, names, extends, fields, values,
  comments, line endings
"""

from __future__ import annotations

from bcrange.parsing.kinds import DeclarationKind
from bcrange.parsing.scanner import (
    INITIAL_STATE,
    match_field,
    match_header,
    match_value,
    scan,
    split_lines,
    step,
    strip_comments,
)

UNIT = "src/Test.al"


class TestStripComments:
    """Tests for strip_comments."""

    def test_plain_line_unchanged(self) -> None:
        """Lines without comments pass through."""
        assert strip_comments("codeunit 50100 Foo") == ("codeunit 50100 Foo", False)

    def test_line_comment_removed(self) -> None:
        """Text after // is dropped."""
        assert strip_comments("x := 1; // note") == ("x := 1; ", False)

    def test_inline_block_comment_removed(self) -> None:
        """Closed /* */ pairs are removed in place."""
        code, opens = strip_comments("codeunit /* a */ 50100 /* b */ Foo")
        assert code == "codeunit  50100  Foo"
        assert opens is False

    def test_unterminated_block_opens(self) -> None:
        """An unterminated /* cuts the line and reports an open block."""
        assert strip_comments("codeunit 50100 Foo /* starts") == ("codeunit 50100 Foo ", True)

    def test_line_comment_before_block_open(self) -> None:
        """A /* inside a // comment does not open a block."""
        assert strip_comments("x // see /* here") == ("x ", False)


class TestMatchHeader:
    """Tests for match_header."""

    def test_bare_name(self) -> None:
        """Parses kind, id and a bare identifier name."""
        header = match_header("codeunit 50100 MyCodeunit", 3, UNIT)
        assert header is not None
        assert header.kind is DeclarationKind.CODEUNIT
        assert header.id == 50100
        assert header.name == "MyCodeunit"
        assert header.location.line == 3
        assert header.location.unit_id == UNIT

    def test_quoted_name_with_spaces(self) -> None:
        """Quoted names keep their spaces and lose the quotes."""
        header = match_header('table 50100 "Customer Ledger"', 1, UNIT)
        assert header is not None
        assert header.name == "Customer Ledger"

    def test_keyword_case_insensitive(self) -> None:
        """Keywords match in any case."""
        header = match_header("PageExtension 50100 MyExt extends Customer", 1, UNIT)
        assert header is not None
        assert header.kind is DeclarationKind.PAGE_EXTENSION

    def test_longest_keyword_wins(self) -> None:
        """tableextension is not read as table."""
        header = match_header("tableextension 50100 Ext extends Customer", 1, UNIT)
        assert header is not None
        assert header.kind is DeclarationKind.TABLE_EXTENSION

    def test_extends_quoted(self) -> None:
        """Quoted extends targets are unquoted."""
        header = match_header(
            'tableextension 50100 "Cust Ext" extends "Customer Card"', 1, UNIT
        )
        assert header is not None
        assert header.extends_name == "Customer Card"

    def test_extends_in_name_ignored(self) -> None:
        """The word extends inside the declared name is not the clause."""
        header = match_header(
            'pageextension 50100 "Extends Sales" extends "Sales Order"', 1, UNIT
        )
        assert header is not None
        assert header.name == "Extends Sales"
        assert header.extends_name == "Sales Order"

    def test_extends_ignored_for_non_extension(self) -> None:
        """Only extension kinds record an extends target."""
        header = match_header("table 50100 Foo extends Bar", 1, UNIT)
        assert header is not None
        assert header.extends_name is None

    def test_requires_name(self) -> None:
        """A header without a name is not a declaration."""
        assert match_header("codeunit 50100", 1, UNIT) is None

    def test_requires_numeric_id(self) -> None:
        """Non-numeric ids do not match."""
        assert match_header("codeunit Foo Bar", 1, UNIT) is None

    def test_unknown_keyword(self) -> None:
        """Kinds without ids are not matched."""
        assert match_header("interface 50100 IFoo", 1, UNIT) is None
        assert match_header("controladdin 50100 Foo", 1, UNIT) is None

    def test_leading_whitespace_allowed(self) -> None:
        """Indented headers still match."""
        assert match_header("    enum 50100 Status", 1, UNIT) is not None


class TestMatchChildren:
    """Tests for match_field and match_value."""

    def test_field_with_quoted_name(self) -> None:
        """Parses a field with a quoted name and bracketed type."""
        field = match_field('        field(1; "No."; Code[20])', 5, UNIT)
        assert field is not None
        assert field.id == 1
        assert field.name == "No."
        assert field.data_type == "Code[20]"
        assert field.location.line == 5

    def test_field_type_trimmed(self) -> None:
        """Surrounding whitespace in the type is trimmed."""
        field = match_field("field(50100 ; Amount ;  Decimal  )", 1, UNIT)
        assert field is not None
        assert field.name == "Amount"
        assert field.data_type == "Decimal"

    def test_field_requires_type(self) -> None:
        """A field entry needs all three parts."""
        assert match_field("field(1; Name)", 1, UNIT) is None

    def test_value_bare_and_quoted(self) -> None:
        """Parses enum values with bare and quoted names."""
        value = match_value("value(0; Open)", 1, UNIT)
        assert value is not None
        assert (value.id, value.name) == (0, "Open")

        value = match_value('  value(10; "In Progress") { }', 1, UNIT)
        assert value is not None
        assert (value.id, value.name) == (10, "In Progress")


class TestStep:
    """Tests for the per-line transition."""

    def test_header_opens_declaration(self) -> None:
        """A header line sets the open declaration without finishing it."""
        state, finished = step(INITIAL_STATE, "codeunit 50100 Foo", 1, UNIT)
        assert finished == []
        assert state.current is not None
        assert state.current.id == 50100
        assert state.depth == 0

    def test_brace_depth_tracked(self) -> None:
        """Depth follows braces on code lines."""
        state, _ = step(INITIAL_STATE, "codeunit 50100 Foo", 1, UNIT)
        state, _ = step(state, "{", 2, UNIT)
        assert state.depth == 1

    def test_closing_brace_finishes(self) -> None:
        """Returning to depth zero finishes the declaration."""
        state, _ = step(INITIAL_STATE, "codeunit 50100 Foo", 1, UNIT)
        state, _ = step(state, "{", 2, UNIT)
        state, finished = step(state, "}", 3, UNIT)
        assert [d.id for d in finished] == [50100]
        assert state.current is None

    def test_block_comment_carried(self) -> None:
        """An open block comment suppresses following lines until closed."""
        state, _ = step(INITIAL_STATE, "/* start", 1, UNIT)
        assert state.in_block_comment
        state, finished = step(state, "codeunit 50100 Hidden", 2, UNIT)
        assert finished == []
        assert state.current is None
        state, _ = step(state, "end */ codeunit 50101 Shown", 3, UNIT)
        assert not state.in_block_comment
        assert state.current is not None
        assert state.current.name == "Shown"

    def test_state_is_not_mutated(self) -> None:
        """step returns a new state and leaves the input unchanged."""
        state, _ = step(INITIAL_STATE, "codeunit 50100 Foo", 1, UNIT)
        step(state, "{", 2, UNIT)
        assert state.depth == 0
        assert INITIAL_STATE.current is None

    def test_trailing_fields_keyword_expects_brace(self) -> None:
        """fields on its own line waits for the opening brace."""
        state, _ = step(INITIAL_STATE, "table 50100 Foo", 1, UNIT)
        state, _ = step(state, "{", 2, UNIT)
        state, _ = step(state, "    fields", 3, UNIT)
        assert state.expecting_fields_brace
        state, _ = step(state, "    {", 4, UNIT)
        assert state.in_fields
        assert not state.expecting_fields_brace


class TestScan:
    """Tests for scan over whole units."""

    def test_empty_text(self) -> None:
        """Empty input yields nothing."""
        assert scan("", UNIT) == []

    def test_single_codeunit(self) -> None:
        """A simple codeunit is found with its location."""
        text = "codeunit 50100 MyCodeunit\n{\n    trigger OnRun()\n    begin\n    end;\n}\n"
        decls = scan(text, UNIT)
        assert len(decls) == 1
        decl = decls[0]
        assert decl.kind is DeclarationKind.CODEUNIT
        assert decl.id == 50100
        assert decl.name == "MyCodeunit"
        assert decl.location.unit_id == UNIT
        assert decl.location.line == 1
        assert decl.fields is None
        assert decl.values is None

    def test_multiple_declarations_in_order(self) -> None:
        """Several declarations in one unit come back in header order."""
        text = (
            "codeunit 50101 Second\n{\n}\n"
            "\n"
            "page 50100 First\n{\n}\n"
            "query 50102 Third\n{\n}\n"
        )
        decls = scan(text, UNIT)
        assert [(d.kind, d.id) for d in decls] == [
            (DeclarationKind.CODEUNIT, 50101),
            (DeclarationKind.PAGE, 50100),
            (DeclarationKind.QUERY, 50102),
        ]
        assert [d.location.line for d in decls] == [1, 5, 8]

    def test_header_without_body_flushed_at_end(self) -> None:
        """A declaration still open at end of text is kept."""
        decls = scan("codeunit 50100 Foo", UNIT)
        assert [d.id for d in decls] == [50100]

    def test_header_finishes_previous(self) -> None:
        """A new header finishes an unclosed previous declaration."""
        decls = scan("codeunit 50100 A\n{\ncodeunit 50101 B\n{\n}\n", UNIT)
        assert [d.id for d in decls] == [50100, 50101]

    def test_one_line_declaration(self) -> None:
        """Header and braces on one line."""
        decls = scan("permissionset 50100 Perms { Assignable = true; }\ncodeunit 50101 B", UNIT)
        assert [d.kind for d in decls] == [
            DeclarationKind.PERMISSION_SET,
            DeclarationKind.CODEUNIT,
        ]

    def test_crlf_line_endings(self) -> None:
        """CRLF and LF give the same line numbers."""
        lf = "codeunit 50100 A\n{\n}\n\ncodeunit 50101 B\n{\n}\n"
        crlf = lf.replace("\n", "\r\n")
        assert [d.location.line for d in scan(crlf, UNIT)] == [1, 5]
        assert scan(crlf, UNIT) == scan(lf, UNIT)

    def test_commented_out_declarations_ignored(self) -> None:
        """Line and block comments hide declarations."""
        text = (
            "// codeunit 50100 LineCommented\n"
            "/*\n"
            "codeunit 50101 BlockCommented\n"
            "{\n"
            "}\n"
            "*/\n"
            "codeunit 50102 Visible\n"
            "{\n"
            "}\n"
        )
        decls = scan(text, UNIT)
        assert [(d.id, d.name, d.location.line) for d in decls] == [(50102, "Visible", 7)]

    def test_braces_in_comments_not_counted(self) -> None:
        """Braces inside comments do not close the declaration."""
        text = "codeunit 50100 A\n{\n    // }\n    /* } */\n}\ncodeunit 50101 B\n"
        decls = scan(text, UNIT)
        assert [d.location.line for d in decls] == [1, 6]

    def test_children_lie_inside_their_declaration(self) -> None:
        """Every field and value line falls between its header and closing brace."""
        lines = [
            "table 50100 Customer",
            "{",
            "    fields",
            "    {",
            "        field(1; No; Code[20]) { }",
            "        field(2; Name; Text[100])",
            "        {",
            "        }",
            "    }",
            "}",
            "enum 50101 Level",
            "{",
            "    value(0; None) { }",
            "    value(1; Gold) { }",
            "}",
            "enumextension 50102 LevelExt extends Level",
            "{",
            "    value(50100; Platinum) { }",
            "}",
        ]

        def closing_line(header_line: int) -> int:
            depth = 0
            for number, line in enumerate(lines[header_line - 1 :], start=header_line):
                depth += line.count("{") - line.count("}")
                if depth == 0 and "}" in line:
                    return number
            raise AssertionError("declaration never closes")

        decls = scan("\n".join(lines), UNIT)
        assert len(decls) == 3
        for decl in decls:
            header = decl.location.line
            close = closing_line(header)
            assert decl.children
            for child in decl.children:
                assert header < child.location.line < close

    def test_commenting_out_a_header_drops_one_declaration(self) -> None:
        """Earlier declarations keep their lines when a later header is commented out."""
        before = "codeunit 1 A\n{\n}\ncodeunit 2 B\n{\n}\ncodeunit 3 C\n{\n}\n"
        after = before.replace("codeunit 2 B", "// codeunit 2 B")
        original = scan(before, UNIT)
        edited = scan(after, UNIT)
        assert len(edited) == len(original) - 1
        assert [(d.id, d.location.line) for d in edited] == [(1, 1), (3, 7)]
        assert edited[0] == original[0]

    def test_table_fields(self) -> None:
        """Fields inside the fields block are collected in order."""
        text = (
            'table 50100 "Customer Ext"\n'
            "{\n"
            "    fields\n"
            "    {\n"
            '        field(1; "No."; Code[20]) { }\n'
            "        field(2; Name; Text[100])\n"
            "        {\n"
            "            Caption = 'Name';\n"
            "        }\n"
            "    }\n"
            "    keys\n"
            "    {\n"
            '        key(PK; "No.") { Clustered = true; }\n'
            "    }\n"
            "}\n"
        )
        decls = scan(text, UNIT)
        assert len(decls) == 1
        fields = decls[0].fields
        assert fields is not None
        assert [(f.id, f.name, f.data_type) for f in fields] == [
            (1, "No.", "Code[20]"),
            (2, "Name", "Text[100]"),
        ]
        assert [f.location.line for f in fields] == [5, 6]
        assert decls[0].values is None

    def test_inline_fields_brace(self) -> None:
        """fields { on one line opens the fields block."""
        text = (
            "tableextension 50110 CustExt extends Customer\n"
            "{\n"
            "    fields {\n"
            "        field(50110; Loyalty; Integer) { }\n"
            "    }\n"
            "}\n"
        )
        decl = scan(text, UNIT)[0]
        assert decl.kind is DeclarationKind.TABLE_EXTENSION
        assert decl.extends_name == "Customer"
        assert decl.fields is not None
        assert [f.id for f in decl.fields] == [50110]

    def test_field_outside_fields_block_ignored(self) -> None:
        """field(...) text outside a fields block is not collected."""
        text = (
            "table 50100 T\n"
            "{\n"
            "    fields\n"
            "    {\n"
            "        field(1; A; Integer) { }\n"
            "    }\n"
            "    field(2; B; Integer)\n"
            "}\n"
        )
        decl = scan(text, UNIT)[0]
        assert decl.fields is not None
        assert [f.id for f in decl.fields] == [1]

    def test_table_without_fields_has_empty_tuple(self) -> None:
        """Field-collecting kinds always get a tuple, even when empty."""
        decl = scan("table 50100 T\n{\n}\n", UNIT)[0]
        assert decl.fields == ()

    def test_enum_values(self) -> None:
        """Enum values anywhere inside the body are collected."""
        text = (
            'enum 50100 "Order Status"\n'
            "{\n"
            "    Extensible = true;\n"
            "    value(0; Open) { Caption = 'Open'; }\n"
            '    value(1; "In Progress")\n'
            "    {\n"
            "    }\n"
            "}\n"
        )
        decl = scan(text, UNIT)[0]
        assert decl.kind is DeclarationKind.ENUM
        assert decl.values is not None
        assert [(v.id, v.name) for v in decl.values] == [(0, "Open"), (1, "In Progress")]
        assert decl.fields is None

    def test_enum_extension_values_and_extends(self) -> None:
        """Enum extensions carry both the target and their values."""
        text = (
            'enumextension 50110 "Status Ext" extends "Order Status"\n'
            "{\n"
            "    value(50110; Archived) { }\n"
            "}\n"
        )
        decl = scan(text, UNIT)[0]
        assert decl.extends_name == "Order Status"
        assert decl.values is not None
        assert [v.id for v in decl.values] == [50110]

    def test_value_outside_body_ignored(self) -> None:
        """A value line at depth zero is not attached."""
        decl = scan("enum 50100 E\nvalue(0; A)\n{\n}\n", UNIT)[0]
        assert decl.values == ()

    def test_codeunit_ignores_field_lines(self) -> None:
        """Kinds without children never collect them."""
        text = "codeunit 50100 C\n{\n    fields\n    {\n        field(1; A; Integer)\n    }\n}\n"
        decl = scan(text, UNIT)[0]
        assert decl.fields is None
        assert decl.children == ()

    def test_malformed_input_never_raises(self) -> None:
        """Garbage input yields an empty list."""
        assert scan("}}}{{ /* \n */ field(;;) value() codeunit x y", UNIT) == []


class TestSplitLines:
    """Tests for split_lines."""

    def test_mixed_endings(self) -> None:
        """LF and CRLF both split; lone CR does not."""
        assert split_lines("a\r\nb\nc\rd") == ["a", "b", "c\rd"]
