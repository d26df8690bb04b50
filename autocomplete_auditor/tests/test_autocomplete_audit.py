"""
Tests for the autocomplete audit.

Scenario matrix:

  A  "cc-namez", CREDIT_CARD_NAME_FULL              → finding cc-name, invalid warning
  B  "tel mobile shipping" misordered, PHONE_HOME…  → finding tel, invalid + order warnings
  C  no attribute, NO_SERVER_DATA                   → not applicable
  D  no attribute, EMAIL_ADDRESS                    → finding email, current "", no warning
  E  every input not applicable                     → notApplicable, score 1
  Unmapped prediction                               → silently dropped (pinned)
"""

import pytest

from autocomplete_auditor.app.coordinator.autocomplete_audit import (
    AutocompleteAudit,
    display_snippet,
)
from autocomplete_auditor.app.schemas.findings import FindingRow
from autocomplete_auditor.app.tables import load_autocomplete_tables
from autocomplete_auditor.tests.fixtures.form_factory import (
    make_form,
    make_input,
    valid_input,
)


@pytest.fixture(scope="module")
def audit():
    return AutocompleteAudit(load_autocomplete_tables())


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

def test_scenario_a_invalid_token_with_prediction(audit):
    report = audit.run([
        make_form(
            make_input("cc-namez", prediction="CREDIT_CARD_NAME_FULL", label="card")
        )
    ])

    assert report.score == 0
    assert report.not_applicable is False
    assert report.findings == [
        FindingRow(
            node={
                "snippet": '<input id="card" autocomplete="cc-namez">',
                "node_label": "card",
            },
            current="cc-namez",
            suggestion="cc-name",
        )
    ]
    assert report.warnings == [
        'Autocomplete token(s): "cc-namez" is invalid in '
        '<input id="card" autocomplete="cc-namez">'
    ]


def test_scenario_b_misordered_tokens_emit_both_warnings(audit):
    report = audit.run([
        make_form(
            make_input(
                "tel mobile shipping",
                prop="",
                prediction="PHONE_HOME_WHOLE_NUMBER",
                label="phone",
            )
        )
    ])

    snippet = '<input id="phone" autocomplete="tel mobile shipping">'

    assert report.score == 0
    assert [f.suggestion for f in report.findings] == ["tel"]
    assert report.findings[0].current == "tel mobile shipping"
    assert report.warnings == [
        f'Autocomplete token(s): "tel mobile shipping" is invalid in {snippet}',
        f'Review order of tokens: "tel mobile shipping" in {snippet}',
    ]
    assert [m.message_id for m in report.warning_messages] == [
        "autocomplete.warningInvalid",
        "autocomplete.warningOrder",
    ]
    assert report.warning_messages[1].values == {
        "tokens": "tel mobile shipping",
        "snippet": snippet,
    }


def test_scenario_c_no_signal_prediction_without_attribute_is_not_applicable(audit):
    report = audit.run([make_form(make_input(None, prediction="NO_SERVER_DATA"))])

    assert report.findings == []
    assert report.warnings == []
    assert report.not_applicable_count == 1
    assert report.not_applicable is True
    assert report.score == 1


def test_scenario_d_missing_attribute_with_prediction(audit):
    report = audit.run([
        make_form(make_input(None, prediction="EMAIL_ADDRESS", label="mail"))
    ])

    assert report.score == 0
    assert len(report.findings) == 1

    finding = report.findings[0]
    assert finding.current == ""
    assert finding.suggestion == "email"
    assert finding.node.snippet == '<input id="mail">'
    assert report.warnings == []


def test_scenario_e_all_inputs_not_applicable(audit):
    report = audit.run([
        make_form(make_input(None), make_input("", prediction="EMPTY_TYPE")),
        make_form(make_input("cc-namez")),
    ])

    assert report.inputs_count == 3
    assert report.not_applicable_count == 3
    assert report.not_applicable is True
    assert report.score == 1
    assert report.display_value is None


# ---------------------------------------------------------------------------
# Edge cases
# ---------------------------------------------------------------------------

def test_no_signal_prediction_with_invalid_attribute_requires_manual_review(audit):
    """
    A no-signal code only makes an input inapplicable when no attribute is
    present. With an invalid attribute the manual review row is reported.
    """
    report = audit.run([
        make_form(make_input("bogus", prediction="NO_SERVER_DATA", label="x"))
    ])

    assert report.findings[0].suggestion == "Requires manual review."
    assert report.findings[0].current == "bogus"
    assert len(report.warnings) == 1


def test_unmapped_prediction_is_silently_dropped(audit):
    report = audit.run([
        make_form(make_input("cc-namez", prediction="SOME_FUTURE_FIELD_TYPE"))
    ])

    assert report.findings == []
    assert report.warnings == []
    assert report.score == 1
    # Counted as applicable: the input carried a signal.
    assert report.not_applicable_count == 0
    assert report.not_applicable is False


def test_valid_inputs_produce_nothing(audit):
    report = audit.run([
        make_form(
            valid_input("email", prediction="EMAIL_ADDRESS"),
            valid_input("section-a shipping tel"),
        )
    ])

    assert report.score == 1
    assert report.findings == []
    assert report.not_applicable is False


def test_empty_form_list_is_not_applicable(audit):
    report = audit.run([])

    assert report.inputs_count == 0
    assert report.not_applicable is True
    assert report.score == 1


def test_snippet_is_truncated_at_title(audit):
    report = audit.run([
        make_form(
            make_input(
                None,
                prediction="NAME_FULL",
                label="who",
                title='Your "full" name',
            )
        )
    ])

    assert report.findings[0].node.snippet == '<input id="who">'


def test_display_snippet_keeps_untitled_snippet():
    assert display_snippet('<input id="a">') == '<input id="a">>'
    assert display_snippet('<input id="a" title="x" title="y">') == '<input id="a">'


# ---------------------------------------------------------------------------
# Report shape
# ---------------------------------------------------------------------------

def test_display_value_is_pluralized(audit):
    one = audit.run([make_form(make_input(None, prediction="EMAIL_ADDRESS"))])
    three = audit.run([
        make_form(
            make_input(None, prediction="EMAIL_ADDRESS"),
            make_input(None, prediction="NAME_FIRST"),
            make_input(None, prediction="COMPANY_NAME"),
        )
    ])

    assert one.display_value == "1 element found"
    assert three.display_value == "3 elements found"


def test_table_headings(audit):
    report = audit.run([])

    assert [(h.key, h.item_type, h.text) for h in report.details.headings] == [
        ("node", "node", "Failing Elements"),
        ("current", "text", "Autocomplete Current Value"),
        ("suggestion", "text", "Autocomplete Suggested Token"),
    ]


def test_findings_preserve_form_then_input_order(audit):
    forms = [
        make_form(
            make_input(None, prediction="NAME_FIRST", label="f1-a"),
            valid_input("email", label="f1-b"),
            make_input("bad", prediction="NAME_LAST", label="f1-c"),
        ),
        make_form(
            make_input(None, prediction="EMAIL_ADDRESS", label="f2-a"),
        ),
    ]

    report = audit.run(forms)

    assert [f.node.node_label for f in report.findings] == ["f1-a", "f1-c", "f2-a"]
    assert [f.suggestion for f in report.findings] == [
        "given-name",
        "family-name",
        "email",
    ]


def test_audit_is_idempotent_and_does_not_mutate_inputs(audit):
    forms = [
        make_form(
            make_input(None, prediction="EMAIL_ADDRESS"),
            make_input("tel mobile shipping", prop="", prediction="PHONE_HOME_WHOLE_NUMBER"),
        )
    ]
    before = [f.model_dump() for f in forms]

    first = audit.run(forms)
    second = audit.run(forms)

    assert first == second
    assert [f.model_dump() for f in forms] == before
    assert forms[0].inputs[0].autocomplete_attribute is None


def test_meta():
    assert AutocompleteAudit.meta.id == "autocomplete"
    assert AutocompleteAudit.meta.required_artifacts == ["FormElements"]
    assert AutocompleteAudit.meta.title == "Input elements use autocomplete"
