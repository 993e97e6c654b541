"""Report builder: text and JSON summaries of a loaded LayerStack."""

import json
from typing import Any

from paintcore.core.types import Layer, LayerStack


def describe_pixel(layer: Layer, x: int, y: int) -> dict[str, Any]:
    """Pixel bytes and colour classification of ``layer`` at canvas (x, y)."""
    pixel = layer.pixel_at(x, y)
    color = layer.color_at(x, y)
    return {
        'x': x,
        'y': y,
        'bgra': list(pixel),
        'argb32': f'#{color.as_argb32():08x}',
        'transparent': color.is_transparent(),
        'dark': color.is_dark(),
    }


def format_text(stack: LayerStack, path: str, probe: tuple[int, int] | None = None) -> str:
    """Format the stack as human-readable text."""
    lines = []
    dim = f'{stack.width}×{stack.height}'
    count = len(stack)
    noun = 'layer' if count == 1 else 'layers'
    lines.append(f'paintcore: {path} ({dim}, {stack.source_format}) — {count} {noun}')
    lines.append('')

    # Topmost layer first, as a layer panel would show it
    for layer in reversed(stack.layers):
        lines.append(f'── {layer.title} [{layer.x},{layer.y} {layer.width}×{layer.height}]')
        flags = []
        if layer.hidden:
            flags.append('hidden')
        if layer.is_blank():
            flags.append('blank')
        suffix = f'  ({", ".join(flags)})' if flags else ''
        lines.append(f'  opacity {layer.opacity:.2f}  blend {layer.blend_mode}{suffix}')
        if probe is not None:
            info = describe_pixel(layer, *probe)
            shade = 'transparent' if info['transparent'] else ('dark' if info['dark'] else 'light')
            lines.append(f'  pixel ({info["x"]},{info["y"]}): {info["argb32"]} bgra={info["bgra"]} {shade}')
        lines.append('')

    return '\n'.join(lines)


def format_json(stack: LayerStack, path: str, probe: tuple[int, int] | None = None) -> str:
    """Format the stack as JSON. Layers are listed bottom first."""
    layers = []
    for layer in stack.layers:
        layer_obj: dict[str, Any] = {
            'title': layer.title,
            'x': layer.x,
            'y': layer.y,
            'width': layer.width,
            'height': layer.height,
            'opacity': layer.opacity,
            'hidden': layer.hidden,
            'blend_mode': layer.blend_mode,
            'blank': layer.is_blank(),
        }
        if probe is not None:
            layer_obj['pixel'] = describe_pixel(layer, *probe)
        layers.append(layer_obj)

    obj: dict[str, Any] = {
        'image': path,
        'format': stack.source_format,
        'dimensions': {'width': stack.width, 'height': stack.height},
        'layers': layers,
    }
    return json.dumps(obj, indent=2)
