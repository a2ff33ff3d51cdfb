import pytest

from packages.board.schema import ProjectType
from packages.board.schema.enums import MemberAction, sa_enum
from packages.board.schema.templates import PROJECT_TEMPLATES, seed_workflows, template_for


def test_template_lookup_accepts_strings() -> None:
    assert template_for("SCRUM") is PROJECT_TEMPLATES[ProjectType.SCRUM]
    assert template_for(ProjectType.KANBAN).project_name == "Kanban"

    with pytest.raises(ValueError):
        template_for("WATERFALL")


def test_every_project_type_has_a_template() -> None:
    assert set(PROJECT_TEMPLATES) == set(ProjectType)
    for template in PROJECT_TEMPLATES.values():
        assert template.default_workflows[0] == "Backlog"
        assert template.default_workflows[-1] == "Done"


def test_seed_workflows_uses_template_positions() -> None:
    assert seed_workflows(["Backlog", "To Do"]) == [(0, "Backlog"), (1, "To Do")]


def test_seed_workflows_skips_duplicates() -> None:
    rows = seed_workflows(["Backlog", "To Do", "Backlog", "Done"])

    assert rows == [(0, "Backlog"), (1, "To Do"), (3, "Done")]


def test_enum_values_and_column_type() -> None:
    assert ProjectType.values() == ("KANBAN", "SCRUM")
    assert MemberAction.values() == ("leave", "remove")

    column_type = sa_enum(ProjectType)
    assert column_type.enums == ["KANBAN", "SCRUM"]


@pytest.mark.parametrize("project_type", list(ProjectType))
def test_template_seeds_dense_indices(project_type) -> None:
    titles = PROJECT_TEMPLATES[project_type].default_workflows

    assert len(set(titles)) == len(titles)
    assert [index for index, _ in seed_workflows(titles)] == list(range(len(titles)))
