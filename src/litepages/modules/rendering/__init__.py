from litepages.modules.rendering.renderer import (
    render_error,
    render_full_page,
    render_home,
    render_not_found,
    render_print_card,
    render_promo_card,
)

__all__ = [
    "render_error",
    "render_full_page",
    "render_home",
    "render_not_found",
    "render_print_card",
    "render_promo_card",
]
