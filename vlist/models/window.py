from dataclasses import dataclass, field


@dataclass(frozen=True)
class VisibleWindow:
    """Inclusive range of item indices mounted for the current scroll position."""

    start: int = 0
    end: int = -1

    @classmethod
    def empty(cls) -> "VisibleWindow":
        return cls(0, -1)

    @property
    def is_empty(self) -> bool:
        return self.end < self.start

    def indices(self) -> range:
        return range(self.start, self.end + 1)

    def __iter__(self):
        return iter(self.indices())

    def __len__(self):
        return max(0, self.end - self.start + 1)

    def __contains__(self, index) -> bool:
        return self.start <= index <= self.end


@dataclass(frozen=True)
class RenderInstruction:
    """One item to mount: its index, absolute offset and opaque content."""

    index: int
    offset: float
    content: object = None


@dataclass
class RenderPlan:
    """Result of a single `VirtualListController.render()` call."""

    window: VisibleWindow
    total_extent: float
    instructions: list = field(default_factory=list)
    unmounted: list = field(default_factory=list)
