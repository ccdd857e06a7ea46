# -*- coding: utf-8 -*-

# Copyright 2019 Julian Betz
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
# 
#      http://www.apache.org/licenses/LICENSE-2.0
# 
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


import sys
import math


_BLOCKS = (' ', ' ', '▏', '▎', '▍', '▌', '▋', '▊', '▉', '▉')


class ProgressBar:
    """A progress bar for a process of known total size.

    Progress is set to absolute positions by calling :meth:`update`, e.g. the
    number of bytes of a corpus file consumed so far.  Lines are redrawn in
    place until the process completes.

    :param int total: A number indicating the progress state of the completed
        process.

    :param bar_size: The width of the progress bar visualization, in numbers of
        characters.

    :param prefix: A function that is called to construct the string prefix
        before the actual progress bar.  Called with the current position and
        the element passed to :meth:`update`.

    :param suffix: A function that is called to construct the string suffix
        after the actual progress bar.  Called with the current position and
        the element passed to :meth:`update`.

    :param str delimiter: The string to print before redrawing the line.

    :param str end: The string to print after the line of the completed
        process.

    :param file: The stream to which to print the line.  Print to ``sys.stderr``
        by default, so that results written to ``sys.stdout`` stay clean.

    """

    def __init__(self, total, *, bar_size=20, prefix=lambda i, element: '|', suffix=lambda i, element: '|', delimiter='\r', end='\n', file=None):
        if not isinstance(total, int) or total < 0:
            raise ValueError('Unable to print bar for process of size %r'
                             % (total,))
        self._i = 0
        self._total = total
        self._bar_size = bar_size
        self._prefix = prefix
        self._suffix = suffix
        self._delimiter = delimiter
        self._end = end
        self._file = sys.stderr if file is None else file
        self._done = False


    @property
    def position(self):
        return self._i


    def update(self, i, element=None):
        """Move the process to position ``i`` and redraw the bar.

        Positions beyond the total are clamped to the total.  Once the total
        is reached, the line is terminated and further updates are ignored.

        """
        if self._done:
            return
        self._i = max(0, min(i, self._total))
        self.print_current(element)
        self._done = self._i >= self._total


    def finish(self, element=None):
        """Complete the process, drawing the full bar."""
        self.update(self._total, element)


    def print_current(self, element=None):
        """Print the progress bar at the current state of the process."""
        print(self._delimiter, end='', file=self._file, flush=False)
        if self._i < self._total:
            complete = self._i / self._total * self._bar_size
            floored = math.floor(complete)
            rest = math.floor((complete - floored) * 8) + 1
            print(self._prefix(self._i, element) + '█' * floored
                  + _BLOCKS[rest]
                  + ' ' * (self._bar_size - floored - 1)
                  + self._suffix(self._i, element),
                  end='', file=self._file, flush=True)
        else:
            print(self._prefix(self._total, element)
                  + '█' * self._bar_size
                  + self._suffix(self._total, element),
                  end=self._end, file=self._file, flush=True)
            self._done = True
