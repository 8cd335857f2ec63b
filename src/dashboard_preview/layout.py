"""Dashboard tile extraction and HTML grid rendering.

Pure functions: the same definition always renders to the same markup.
Nothing here raises on malformed input; unexpected shapes render as an
empty grid.
"""

from __future__ import annotations

import json
from html import escape
from typing import Any

from .json_value import JsonKind, JsonValue
from .models import DASHBOARD_RESOURCE_TYPE, UNTITLED_TILE, Tile, TilePosition

DEFAULT_GRID_COLUMNS = 18
PAGE_HEADING = "Azure Dashboard Layout"

_STYLES = """
        body {
            font-family: Arial, sans-serif;
            padding: 10px;
        }
        .tiles-container {
            display: grid;
            grid-template-columns: repeat(%(columns)d, 1fr);
            gap: 10px;
            margin-top: 20px;
        }
        .tile {
            border: 1px solid #ccc;
            border-radius: 8px;
            padding: 10px;
            background-color: #f4f4f4;
            box-shadow: 2px 2px 10px rgba(0, 0, 0, 0.1);
            transition: all 0.3s ease;
        }
        .tile:hover {
            background-color: #e0e0e0;
            transform: translateY(-5px);
        }
        .tile h3 {
            margin: 0;
            font-size: 1.1em;
        }
        .tile-content {
            margin-top: 10px;
            font-size: 0.9em;
            color: #555;
        }
        .preview-error {
            border: 1px solid #e0a0a0;
            border-radius: 8px;
            padding: 10px;
            background-color: #fdf0f0;
            color: #a01818;
            white-space: pre-wrap;
        }"""


def find_dashboard_resource(definition: JsonValue) -> JsonValue:
    """Locate the dashboard resource in a template or a bare resource."""
    resources = definition.get("resources")
    if resources.kind is JsonKind.ARRAY:
        for resource in resources.as_list():
            if resource.get("type").as_str() == DASHBOARD_RESOURCE_TYPE:
                return resource
        return JsonValue.missing()
    if definition.get("type").as_str() == DASHBOARD_RESOURCE_TYPE:
        return definition
    return JsonValue.missing()


def tile_title(part: JsonValue) -> str:
    part_type = part.path("metadata", "type").as_str()
    if not part_type:
        return UNTITLED_TILE
    return part_type.split("/")[-1] or UNTITLED_TILE


def tile_position(part: JsonValue) -> TilePosition:
    position = part.get("position")
    return TilePosition(
        x=max(position.get("x").as_int(0), 0),
        y=max(position.get("y").as_int(0), 0),
        col_span=max(position.get("colSpan").as_int(1), 1),
        row_span=max(position.get("rowSpan").as_int(1), 1),
    )


def tile_from_part(part: JsonValue) -> Tile:
    position = tile_position(part)
    return Tile(title=tile_title(part), position=position, content=json.dumps(position.to_arm()))


def extract_tiles(definition: Any) -> list[Tile]:
    """Return the tiles of the first lens, in source order."""
    resource = find_dashboard_resource(JsonValue.wrap(definition))
    lenses = resource.path("properties", "lenses").as_list()
    if not lenses:
        return []
    parts = lenses[0].get("parts")
    return [tile_from_part(part) for part in parts.as_list()]


def _tile_html(tile: Tile) -> str:
    pos = tile.position
    style = f"grid-column: {pos.x + 1} / span {pos.col_span}; grid-row: {pos.y + 1} / span {pos.row_span};"
    return (
        f'        <div class="tile" style="{style}">\n'
        f"            <h3>{escape(tile.title, quote=False)}</h3>\n"
        f'            <div class="tile-content">{escape(tile.content, quote=False)}</div>\n'
        "        </div>\n"
    )


def _page(body: str, *, columns: int = DEFAULT_GRID_COLUMNS) -> str:
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        '    <meta charset="utf-8">\n'
        f"    <style>{_STYLES % {'columns': columns}}\n    </style>\n"
        "</head>\n"
        "<body>\n"
        f"    <h2>{PAGE_HEADING}</h2>\n"
        f"{body}"
        "</body>\n"
        "</html>\n"
    )


def render_grid(tiles: list[Tile], *, columns: int = DEFAULT_GRID_COLUMNS) -> str:
    boxes = "".join(_tile_html(tile) for tile in tiles)
    body = f'    <div class="tiles-container">\n{boxes}    </div>\n'
    return _page(body, columns=columns)


def render_error(message: str, *, columns: int = DEFAULT_GRID_COLUMNS) -> str:
    body = f'    <div class="preview-error">{escape(message, quote=False)}</div>\n'
    return _page(body, columns=columns)


def render(definition: Any, *, columns: int = DEFAULT_GRID_COLUMNS) -> str:
    """Render a dashboard definition, or the error it carries, as a full HTML page."""
    root = JsonValue.wrap(definition)
    error = root.get("error")
    if not error.is_missing:
        message = error.as_str() if error.kind is JsonKind.STRING else json.dumps(error.raw)
        return render_error(message, columns=columns)
    return render_grid(extract_tiles(root), columns=columns)
