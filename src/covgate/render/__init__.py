from covgate.render.human import render_results
from covgate.render.json import format_json

__all__ = ["format_json", "render_results"]
