"""
Static HTML page describing a built atlas.
"""

import logging
from pathlib import Path

from .geometry import CanvasSpec

REPORT_TITLE = "Poster Atlas Images"


def render_report_html(canvas_spec: CanvasSpec, images_placed: int, capacity: int,
                       atlas_name: str) -> str:
    """
    Render the index page for an atlas.

    Args:
        canvas_spec: Canvas the atlas was built with
        images_placed: Number of images composited into the atlas
        capacity: Number of grid slots
        atlas_name: Atlas file name, relative to the page

    Returns:
        HTML document text
    """
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{REPORT_TITLE}</title>
  <style>
    body {{
      font-family: Arial, sans-serif;
      max-width: 800px;
      margin: 0 auto;
      padding: 20px;
    }}
    .atlas-container {{
      text-align: center;
      margin: 20px 0;
    }}
    .atlas-image {{
      max-width: 100%;
      border: 1px solid #ddd;
      border-radius: 8px;
    }}
    .info {{
      background: #f5f5f5;
      padding: 15px;
      border-radius: 8px;
      margin: 20px 0;
    }}
  </style>
</head>
<body>
  <h1>{REPORT_TITLE}</h1>
  <div class="info">
    <p>This page serves the poster images packed into a single atlas.</p>
    <p>Atlas size: {canvas_spec.width} &times; {canvas_spec.height}</p>
    <p>Images: {images_placed}/{capacity}</p>
  </div>

  <div class="atlas-container">
    <h2>Atlas Image</h2>
    <img src="{atlas_name}" alt="Atlas Image" class="atlas-image">
  </div>

  <div class="info">
    <h3>Direct access URL</h3>
    <p><code>{atlas_name}</code> next to this page</p>
  </div>
</body>
</html>
"""


def write_report(output_dir: Path, canvas_spec: CanvasSpec, images_placed: int,
                 capacity: int, atlas_name: str, filename: str = "index.html") -> Path:
    """Write the index page into the output directory and return its path."""
    report_path = Path(output_dir) / filename
    html = render_report_html(canvas_spec, images_placed, capacity, atlas_name)
    with open(report_path, 'w', encoding='utf-8') as f:
        f.write(html)
    logging.getLogger(__name__).info(f"Wrote report: {report_path}")
    return report_path
