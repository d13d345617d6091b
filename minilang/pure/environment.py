"""Variable storage for minilang: one flat, case-sensitive mapping of name to value, with no declarations and no
scopes. A single Environment lives as long as its Session.
"""

from minilang.lang.error import UndefinedVariable


class Environment:

    def __init__(self):
        self.variables = {}

    def get(self, name):
        """Returns value of name. Raises UndefinedVariable if name has never been set."""
        try:
            return self.variables[name]
        except KeyError:
            raise UndefinedVariable(name) from None

    def set(self, name, value):
        """Inserts or overwrites name."""
        self.variables[name] = value

    def items(self):
        """(name, value) pairs sorted by name."""
        return sorted(self.variables.items())

    def __contains__(self, name):
        return name in self.variables

    def __len__(self):
        return len(self.variables)

    def __repr__(self):
        return f"Environment({self.variables})"
