# Unit tests for the skill panel renderer

import pytest

from resume_skills.renderer import SKELETON_ROWS, panel_view, render_skill_panel
from resume_skills.submission import SkillPanelState


class TestPanelView:

    @pytest.mark.parametrize(
        "state, view",
        [
            (SkillPanelState(is_loading=True, error="x", skills=["Go"]), "loading"),
            (SkillPanelState(error="Skill extraction failed: boom.", skills=["Go"]), "error"),
            (SkillPanelState(), "empty"),
            (SkillPanelState(skills=["Go"]), "skills"),
        ],
    )
    def test_precedence(self, state, view):
        assert panel_view(state) == view


class TestRenderSkillPanel:

    def test_skills_are_listed_in_order(self):
        html = render_skill_panel(SkillPanelState(skills=["Python", "Go", "Python"]), inline=False)

        assert html.count('class="skill-badge"') == 3
        assert html.index(">Python<") < html.index(">Go<")
        assert 'aria-label="Skill: Go"' in html

    def test_skill_text_is_escaped(self):
        html = render_skill_panel(SkillPanelState(skills=["<script>alert(1)</script>"]), inline=False)

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_loading_shows_skeletons(self):
        html = render_skill_panel(SkillPanelState(is_loading=True), inline=False)

        assert html.count('class="skeleton"') == SKELETON_ROWS
        assert 'aria-busy="true"' in html

    def test_error_is_shown(self):
        html = render_skill_panel(SkillPanelState(error="Skill extraction failed: timeout."), inline=False)

        assert "Error Extracting Skills" in html
        assert "Skill extraction failed: timeout." in html

    def test_empty_placeholder(self):
        html = render_skill_panel(SkillPanelState(), inline=False)

        assert "No skills extracted yet" in html

    def test_inline_css(self):
        html = render_skill_panel(SkillPanelState(), inline=True)

        assert "<style>" in html
        assert ".skill-badge" in html
