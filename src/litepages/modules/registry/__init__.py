from litepages.modules.registry.registry import LiteDraft, SlugRegistry, normalize_slug

__all__ = ["LiteDraft", "SlugRegistry", "normalize_slug"]
