"""renderers/ — Output formats for an archived Book."""

from errors import UnsupportedModeError

IMPLEMENTED_FORMATS = {"epub", "markdown"}
ANNOUNCED_FORMATS = {"audiobook", "html"}
ALL_FORMATS = IMPLEMENTED_FORMATS | ANNOUNCED_FORMATS


def get_renderer(mode: str):
    """
    Return the render function for an output format.
    Announced formats without a renderer raise UnsupportedModeError, so callers
    should resolve the renderer before doing any network work.
    """
    if mode == "epub":
        from renderers.epub_renderer import render_epub
        return render_epub
    elif mode == "markdown":
        from renderers.markdown_renderer import render_markdown
        return render_markdown
    elif mode in ANNOUNCED_FORMATS:
        raise UnsupportedModeError(mode)
    else:
        raise ValueError(
            f"Unknown output format: '{mode}'. "
            f"Supported: {', '.join(sorted(ALL_FORMATS))}"
        )
