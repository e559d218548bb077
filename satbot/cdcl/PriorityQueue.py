class PriorityQueue:
    """
    Indexed binary max-heap of variables keyed by activity.

    Every key keeps a slot in the heap array; the first ``size`` slots form
    the live heap and removed keys are parked behind it, so re-adding a key
    is O(log n). Among equal priorities the smallest key comes first, which
    keeps the branching order deterministic.
    """

    def __init__(self, start_list):
        """
        Constructor of the priority queue class.

        Parameters:
            start_list: the initial array of scores; index 0 is unused and
                        index k holds the score of key k

        Return:
            the initialized priority queue object
        """

        self.size = len(start_list) - 1
        temp = start_list[1:]

        self.heap = []

        self.indices = []

        ctr = 1
        for x in temp:
            self.heap.append([x, ctr])
            self.indices.append(ctr - 1)
            ctr += 1

        for i in range(int(self.size / 2) - 1, -1, -1):
            self.heapify(i)

    def __len__(self):
        return self.size

    def _before(self, ind1, ind2):
        """
        True if the element at ind1 must sit above the element at ind2.
        """
        p1, k1 = self.heap[ind1]
        p2, k2 = self.heap[ind2]
        return p1 > p2 or (p1 == p2 and k1 < k2)

    def swap(self, ind1, ind2):
        """
        Swaps elements pointed by ind1 and ind2 in the heap.

        Parameters:
            ind1: index in the heap of first element to be swapped
            ind2: index in the heap of the second element to be swapped

        Return:
            None
        """

        self.heap[ind1], self.heap[ind2] = self.heap[ind2], self.heap[ind1]

        p1 = self.heap[ind1][1] - 1
        p2 = self.heap[ind2][1] - 1
        self.indices[p1], self.indices[p2] = self.indices[p2], self.indices[p1]

    def heapify(self, node_index):
        """
        Takes in a node_index and, assuming that its children subtrees
        are heaps, sifts the node down until the tree rooted at
        node_index is a heap.

        Parameters:
            node_index: root of the tree which has to be heapified

        Return:
            None
        """

        best = node_index

        left_index = 2 * node_index + 1
        if left_index < self.size and self._before(left_index, best):
            best = left_index

        right_index = 2 * node_index + 2
        if right_index < self.size and self._before(right_index, best):
            best = right_index

        if best != node_index:
            self.swap(best, node_index)
            self.heapify(best)

    def _sift_up(self, pos):
        while pos != 0:
            par = (pos - 1) // 2
            if self._before(pos, par):
                self.swap(pos, par)
                pos = par
            else:
                break

    def contains(self, key):
        return self.indices[key - 1] < self.size

    def priority(self, key):
        return self.heap[self.indices[key - 1]][0]

    def get_top(self):
        """
        Get the top element (with max priority) from the queue.

        Parameters:
            None

        Return:
            -1 if queue is empty else the element with the highest priority
        """

        if self.size == 0:
            return -1

        top_element = self.heap[0][1]

        self.swap(0, self.size - 1)
        self.size -= 1
        self.heapify(0)

        return top_element

    def increase_update(self, key, value):
        """
        Method takes in a key and value and for the element that matches the key,
        its priority is increased by value. Removed keys keep their priority
        up to date without being moved.

        Parameters:
            key: element whose priority is to be increased
            value: amount by which the priority has to be increased

        Return:
            None
        """
        pos = self.indices[key - 1]

        self.heap[pos][0] += value

        if pos < self.size:
            self._sift_up(pos)

    def scale(self, factor):
        """
        Multiply every priority by a positive factor. The order is unchanged,
        so the heap shape stays valid.
        """
        for entry in self.heap:
            entry[0] *= factor

    def remove(self, key):
        """
        Remove the element pointed by key from the queue.

        Parameters:
            key: the element to be removed from the queue

        Return:
            None
        """
        pos = self.indices[key - 1]
        if pos >= self.size:
            return

        self.swap(pos, self.size - 1)
        self.size -= 1

        if pos < self.size:
            moved_key = self.heap[pos][1]
            self._sift_up(pos)
            self.heapify(self.indices[moved_key - 1])

    def add(self, key):
        """
        Method to put a removed element (key) back into the priority queue
        with the priority it last had.

        Parameters:
            key: the element to be added in the priority queue

        Return:
            None
        """
        pos = self.indices[key - 1]
        if pos < self.size:
            return

        self.swap(pos, self.size)
        self.size += 1

        self._sift_up(self.size - 1)
