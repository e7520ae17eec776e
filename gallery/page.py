"""Static HTML gallery page for the rendered artworks."""

import datetime
import html
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from gallery.builder import RenderedArtwork
from gallery.config import GalleryConfig

logger = logging.getLogger(__name__)

MONO_FONT = "Consolas, 'Courier New', Courier, Monaco, monospace"

FORK_RIBBON_SRC = "https://s3.amazonaws.com/github/ribbons/forkme_right_red_aa0000.png"


def terminal_command(encoded: str, script_url: str) -> str:
    """Shell one-liner that prints the artwork with the ANSI Pixels script."""
    return f"python -c \"$(curl -s {script_url})\" '{encoded}'"


def _page_head(config: GalleryConfig) -> str:
    title = html.escape(config.page_title)
    return f"""<!DOCTYPE html>
<meta charset="utf8">
<link rel="shortcut icon" href="{html.escape(config.favicon)}" type="image/png">
<title>{title}</title>
<style>
body {{
  color: white;
  background-color: #333;
}}
a {{ color: #99f; }}
p.terminal {{
  width: 100%;
  font-family: {MONO_FONT};
}}
p.terminal > input {{
  color: white;
  width: calc(100% - 3em);
  background-color: transparent;
  border: black 0px solid;
  font-family: {MONO_FONT};
}}
img.px-img {{ image-rendering: pixelated; }}
</style>

<header>
  <h1>{title}</h1>
  <p>Example arts with
    <a href="{html.escape(config.editor_url)}">ANSI Pixels</a></p>
</header>
"""


def _artwork_section(entry: RenderedArtwork, config: GalleryConfig) -> str:
    record = entry.record
    cmd = html.escape(terminal_command(record.encoded, config.script_url))
    edit_href = html.escape(f"{config.editor_url}#{record.encoded}")
    title = html.escape(record.title)
    size_attrs = ""
    if entry.width and entry.height:
        size_attrs = f' width="{entry.width}" height="{entry.height}"'
    return f"""
<div>
  <h2>{title}</h2>
  <p class="terminal">
    $ <input readonly value="{cmd}" onfocus="this.select();">
    <br>
    <img class="px-img" src="{html.escape(entry.image_href)}" alt="{title}"{size_attrs}>
    <a href="{edit_href}">Edit this</a>
  </p>
</div>
"""


def _page_foot(config: GalleryConfig, year: int) -> str:
    return f"""
<footer>
  <p><small>Copyright &copy; {year} - {html.escape(config.author)}</small></p>
</footer>
<a href="{html.escape(config.repo_url)}"><img style="position: absolute; top: 0; right: 0; border: 0;" src="{FORK_RIBBON_SRC}" alt="Fork me on GitHub"></a>
"""


def render_page(
    entries: Sequence[RenderedArtwork],
    config: Optional[GalleryConfig] = None,
    year: Optional[int] = None,
) -> str:
    """Build the gallery HTML for ``entries`` in the given order."""
    config = config or GalleryConfig()
    if year is None:
        year = datetime.date.today().year

    parts: List[str] = [_page_head(config)]
    for entry in entries:
        parts.append(_artwork_section(entry, config))
    parts.append(_page_foot(config, year))
    return "".join(parts)


def write_page(
    entries: Sequence[RenderedArtwork],
    config: Optional[GalleryConfig] = None,
    year: Optional[int] = None,
) -> Path:
    """Write the gallery page to ``config.page_path`` and return the path."""
    config = config or GalleryConfig()
    output_path = config.page_path
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_page(entries, config, year), encoding="utf-8")
    logger.info("Gallery written to %s (%d artwork(s))", output_path, len(entries))
    return output_path
