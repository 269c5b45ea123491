"""Scoped name bindings shared by the type checker (name: Type) and the evaluator (name: Value)."""

from contextlib import contextmanager


class Scope:
    """Mutable mapping of name to binding, where every name holds a stack of bindings (innermost last). Bindings are
    only ever added through bind/bind_many, which remove them again when the block exits, whether or not it raised.
    """

    def __init__(self):
        self.bound = {}

    def get(self, name, default=None):
        """Returns innermost binding of name, or default if name is unbound."""
        stack = self.bound.get(name)
        return stack[-1] if stack else default

    def _push(self, name, binding):
        self.bound[name] = self.bound.get(name, []) + [binding]

    def _pop(self, name):
        self.bound[name].pop()
        if not self.bound[name]:
            del self.bound[name]

    @contextmanager
    def bind(self, name, binding):
        """Binds name for the duration of the with block. A previous binding of name is shadowed, not replaced."""
        self._push(name, binding)
        try:
            yield self
        finally:
            self._pop(name)

    @contextmanager
    def bind_many(self, bindings):
        """Same as bind, but for every (name, binding) pair in bindings."""
        pushed = []
        try:
            for name, binding in bindings:
                self._push(name, binding)
                pushed.append(name)
            yield self
        finally:
            for name in reversed(pushed):
                self._pop(name)

    def __contains__(self, name):
        return name in self.bound

    def __len__(self):
        return len(self.bound)
