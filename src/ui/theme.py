"""Light/dark palettes and the CSS variables injected into the page."""

# -- House palettes ---------------------------------------------------------
LIGHT = {
    "bg": "linear-gradient(135deg, #EEF2FF 0%, #FFFFFF 50%, #F0F9FF 100%)",
    "card": "rgba(255, 255, 255, 0.70)",
    "card_border": "rgba(255, 255, 255, 0.50)",
    "tile": "rgba(241, 245, 249, 0.50)",
    "text": "#0F172A",
    "muted": "rgba(15, 23, 42, 0.55)",
    "accent": "#4F46E5",
    "sunrise": "#FB923C",
    "sunset": "#818CF8",
    "error": "#DC2626",
}

DARK = {
    "bg": "#020617",
    "card": "rgba(15, 23, 42, 0.60)",
    "card_border": "rgba(51, 65, 85, 0.50)",
    "tile": "rgba(255, 255, 255, 0.05)",
    "text": "#F1F5F9",
    "muted": "#94A3B8",
    "accent": "#818CF8",
    "sunrise": "#FB923C",
    "sunset": "#818CF8",
    "error": "#F87171",
}


def palette(is_dark: bool) -> dict:
    return DARK if is_dark else LIGHT


def theme_css(is_dark: bool) -> str:
    """`:root` variables consumed by app/style.css plus the app background."""
    p = palette(is_dark)
    variables = "\n".join(f"  --wx-{k.replace('_', '-')}: {v};" for k, v in p.items())
    return (
        ":root {\n" + variables + "\n}\n"
        ".stApp { background: var(--wx-bg); color: var(--wx-text); }\n"
    )
