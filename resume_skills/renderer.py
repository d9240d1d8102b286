from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

_CSS_PATH = Path(__file__).parent / "static" / "style.css"
env = Environment(loader=FileSystemLoader(Path(__file__).parent / "templates"),
                  autoescape=True)

SKELETON_ROWS = 5


def panel_view(state: Any) -> str:
    """Which of the four panel states to show: loading, error, empty or skills."""
    if state.is_loading:
        return "loading"
    if state.error:
        return "error"
    if not state.skills:
        return "empty"
    return "skills"


def render_skill_panel(state: Any, inline: bool = True) -> str:
    """Render the skill panel → HTML.  If inline=True, embed CSS in a <style> tag."""
    css_inline = _CSS_PATH.read_text() if inline else ""
    return env.get_template("skills.html").render(
        view=panel_view(state),
        skills=list(state.skills or []),
        error=state.error,
        skeleton_rows=SKELETON_ROWS,
        inline_css=css_inline,
    )
