from acrolinx_bridge.models.report import Issue, ResultPayload, Target

from conftest import RESULT_DATA


def test_issue_accepts_native_nesting():
    issue = Issue.model_validate(RESULT_DATA["issues"][1])
    assert issue.goal_id == "spelling"
    assert issue.guidance_html == ""
    assert issue.suggestions == ["The", "Ten"]
    m = issue.positional_matches[0]
    assert (m.original_begin, m.original_end, m.original_text) == (0, 3, "Teh")
    assert [s.display_name_html for s in issue.sub_issues] == ["Misspelled word", "Possible transposition"]


def test_issue_accepts_flat_shape():
    issue = Issue.model_validate({
        "displayNameHtml": "x",
        "positionalMatches": [{"originalBegin": 1, "originalEnd": 2, "originalText": "y"}],
        "suggestions": ["z"],
    })
    assert issue.positional_matches[0].original_text == "y"
    assert issue.suggestions == ["z"]


def test_result_without_quality_scores_zero():
    result = ResultPayload.from_data({"issues": []})
    assert result.score == 0
    assert result.goals == [] and result.issues == []


def test_target_aliases():
    t = Target.model_validate({"id": "a", "displayName": "Alpha"})
    assert t.display_name == "Alpha"
    assert t.model_dump(by_alias=True) == {"id": "a", "displayName": "Alpha"}
