class ItemMount:
    """
    Per-item adapter between the list controller and the host's layout.

    The host positions `content` at `offset`, lays it out, then calls
    `after_layout()`. Measurement happens only there, and only when the
    dependency set (index, content, callback) changed since the last report.
    """

    def __init__(self, index: int, offset: float, content, on_height_change, measure):
        """
        Args:
            index: Item index this mount renders
            offset: Absolute top offset of the item
            content: Opaque renderable produced by the content provider
            on_height_change: Callback `(index, measured) -> bool`
            measure: Host function `(content) -> float` returning the laid-out extent
        """
        self.index = index
        self.offset = offset
        self.content = content
        self._on_height_change = on_height_change
        self._measure = measure
        self._pending = True
        self._mounted = True
        self.last_measured = None

    @property
    def pending(self) -> bool:
        return self._pending and self._mounted

    @property
    def mounted(self) -> bool:
        return self._mounted

    def update(self, *, index: int, offset: float, content, on_height_change) -> bool:
        """Reposition the mount; returns True if a re-measure is now pending."""
        deps_changed = (
            index != self.index
            or content is not self.content
            or on_height_change is not self._on_height_change
        )
        self.index = index
        self.offset = offset
        self.content = content
        self._on_height_change = on_height_change
        if deps_changed:
            self._pending = True
        return self.pending

    def invalidate(self):
        self._pending = True

    def set_measure(self, measure):
        self._measure = measure
        self._pending = True

    def after_layout(self) -> bool:
        """Post-layout checkpoint: measure and report if pending."""
        if not self.pending:
            return False
        self._pending = False
        measured = self._measure(self.content)
        self.last_measured = measured
        return bool(self._on_height_change(self.index, measured))

    def unmount(self):
        self._mounted = False
        self._pending = False
