"""
A text renderer for playground sessions.
"""
import pystache

from playground.playground_datatypes import Session, Unloaded, Loading, Ready, Failed

PAGE_TEMPLATE = """\
rufus playground
== Program ==
{{#program_lines}}
{{number}} | {{text}}
{{/program_lines}}
== Example ==
{{#examples}}
{{marker}} {{position}}. {{name}}
{{/examples}}
{{^examples}}
  (no examples)
{{/examples}}
== Result ==
{{result}}
{{#has_output}}
== Output ==
{{output}}
{{/has_output}}
== Module: {{module}} =={{#running}} (running){{/running}}
"""


class Printer:
    """Formats a Session into the playground's text page."""

    def __init__(self, editor_rows=15, template=PAGE_TEMPLATE):
        self.editor_rows = editor_rows
        self.template = template
        # Program text is shown verbatim.
        self._renderer = pystache.Renderer(escape=lambda u: u)

    def pformat(self, session: Session) -> str:
        return self._renderer.render(self.template, self.context(session))

    def context(self, session: Session) -> dict:
        lines = session.program.split("\n") if session.program else []
        lines += [""] * max(self.editor_rows - len(lines), 0)
        width = len(str(len(lines)))
        return {
            "program_lines": [
                {"number": str(i).rjust(width), "text": text}
                for i, text in enumerate(lines, start=1)
            ],
            "examples": [
                {
                    "marker": ">" if ref.file == session.selected else " ",
                    "position": i,
                    "name": ref.name,
                }
                for i, ref in enumerate(session.examples, start=1)
            ],
            "result": session.result,
            "has_output": bool(session.output),
            "output": session.output,
            "module": self.module_label(session),
            "running": session.running,
        }

    def module_label(self, session: Session) -> str:
        match session.module:
            case Unloaded():
                return "not loaded"
            case Loading():
                return "loading"
            case Ready():
                return "ready"
            case Failed(error=error):
                return f"failed ({error})"
