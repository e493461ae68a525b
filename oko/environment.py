from typing import Dict, List, Optional, Tuple
from oko.types import Binding


class Environment:
    """The scope stack: frame 0 is global, every user call pushes one frame.

    Lookups walk from the current frame outward to frame 0 and report the
    index of the frame that answered, so that mutation can be written back to
    the frame that owns the binding.
    """
    def __init__(self):
        self.frames: List[Dict[str, Binding]] = [{}]
        self.current = 0

    @property
    def depth(self) -> int:
        return self.current

    def lookup(self, name: str) -> Optional[Tuple[Binding, int]]:
        for index in range(self.current, -1, -1):
            frame = self.frames[index]
            if name in frame:
                return frame[name], index
        return None

    def get(self, name: str) -> Optional[Binding]:
        found = self.lookup(name)
        return found[0] if found is not None else None

    def declare(self, name: str, binding: Binding):
        # := and funct always bind in the innermost frame
        self.frames[self.current][name] = binding

    def assign(self, frame_index: int, name: str, binding: Binding):
        self.frames[frame_index][name] = binding

    def unset(self, name: str):
        self.frames[self.current].pop(name, None)

    def push_frame(self, bindings: Dict[str, Binding]):
        self.frames.append(bindings)
        self.current = len(self.frames) - 1

    def pop_frame(self):
        if self.current == 0:
            raise IndexError('cannot pop the global frame')
        self.frames.pop()
        self.current = len(self.frames) - 1
