"""Gallery build configuration: paths, page constants, worker limits."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


# ---------------------------------------------------------------------------
# Page constants
# ---------------------------------------------------------------------------
PAGE_TITLE = "ANSI Pixels Examples"
AUTHOR = "Keiichiro Ui"
EDITOR_URL = "https://kui.github.io/ansi_pixels/"
SCRIPT_URL = "https://raw.githubusercontent.com/kui/ansi_pixels/master/tool/ansi-pixels.py"
REPO_URL = "https://github.com/kui/ansi-pixels-examples"

DEFAULT_DATASET = Path("ansi-pixels.tsv")


@dataclass
class GalleryConfig:
    """Top-level gallery build configuration."""
    # Paths
    dataset_path: Path = DEFAULT_DATASET
    output_dir: Path = Path(".")
    image_dir_name: str = "img"           # relative to output_dir, also used in <img src>
    page_name: str = "index.html"
    favicon: str = "favicon.png"

    # Page copy
    page_title: str = PAGE_TITLE
    author: str = AUTHOR
    editor_url: str = EDITOR_URL
    script_url: str = SCRIPT_URL
    repo_url: str = REPO_URL

    # Build behaviour
    max_workers: Optional[int] = None     # None -> executor default
    fail_fast: bool = False               # abort the page when any record fails

    @property
    def image_dir(self) -> Path:
        return self.output_dir / self.image_dir_name

    @property
    def page_path(self) -> Path:
        return self.output_dir / self.page_name

    def image_href(self, index: int) -> str:
        """Page-relative URL of the PNG for record ``index``."""
        return f"{self.image_dir_name}/{index}.png"

    def image_path(self, index: int) -> Path:
        return self.image_dir / f"{index}.png"

    def ensure_dirs(self):
        self.image_dir.mkdir(parents=True, exist_ok=True)
