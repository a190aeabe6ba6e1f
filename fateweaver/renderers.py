"""Renderers that convert chain results into text output.

The TextRenderer produces terminal-friendly lines for the demo tool and
the Streamlit page's log. Other renderers can consume the same records.
"""

from __future__ import annotations

from fateweaver.records import ChainResult, StepResult


class TextRenderer:
    """Renders a ChainResult to text lines, one per step plus a total."""

    def render_chain(self, record: ChainResult) -> list[str]:
        lines = [self.render_step(r) for r in record.step_results]
        lines.append(self.render_total(record))
        return lines

    def render_step(self, record: StepResult) -> str:
        if record.skipped:
            return f"{record.label}: skipped"
        rolls = ", ".join(str(r) for r in record.rolls)
        line = f"{record.label}: {record.total} ({record.formula}) [{rolls}]"
        if record.duality_outcome == "crit":
            line += " critical success"
        elif record.duality_outcome:
            line += f" with {record.duality_outcome}"
        elif record.was_crit:
            line += " crit!"
        return line

    def render_total(self, record: ChainResult) -> str:
        if record.breakdown:
            return f"Total: {record.grand_total} ({record.breakdown})"
        return f"Total: {record.grand_total}"
