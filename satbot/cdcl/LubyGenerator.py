import math


class LubyGenerator:
    """
    Generator of the Luby sequence 1, 1, 2, 1, 1, 2, 4, 1, 1, 2, ...

    Each solver owns its own generator, so concurrent solves never share
    restart state.
    """

    def __init__(self):
        self.reset()

    def get_next_luby_number(self):
        """
        Method to get the next luby number

        Parameters:
            None

        Return:
            the next Luby number in the sequence
        """
        size = len(self._sequence)

        to_fill = size + 1

        if math.log2(to_fill + 1).is_integer():
            self._sequence.append(self._mult)
            self._mult *= 2
            self._minu = size + 1
        else:
            self._sequence.append(self._sequence[to_fill - self._minu - 1])

        return self._sequence[size]

    def reset(self):
        """
        Method to reset the Luby Generator
        to initial conditions.

        Parameters:
            None

        Return:
            None
        """
        self._sequence = []
        self._mult = 1
        self._minu = 0
