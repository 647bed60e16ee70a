from litepages.modules.views.counter import ViewCounter

__all__ = ["ViewCounter"]
