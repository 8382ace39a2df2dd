from archforge.renderer.mermaid_renderer import render_mermaid

__all__ = ["render_mermaid"]
