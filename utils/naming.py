"""Plugin naming utilities: WordPress-style slugs and file names."""

import re


def slugify(text):
    """Convert text to a WordPress-style slug ("My Plugin!" -> "my-plugin")."""
    text = text.lower().strip()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_-]+", "-", text)
    return text.strip("-")


def plugin_file_name(plugin_name):
    """Main file name for a single-file plugin."""
    slug = slugify(plugin_name or "")
    return f"{slug or 'plugin'}.php"
