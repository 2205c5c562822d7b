"""
open set for the pathfinder

entries are (src, dst, cost) triads where cost is the cumulative cost of reaching dst
through src. the queue hands them out in non-decreasing cost, equal costs in insertion
order. a heap holds every entry ever inserted; entries dropped by replace_with_better or
pop are only marked dead and get discarded once they reach the top.
"""
import heapq
import itertools
from collections import namedtuple, defaultdict

Triad = namedtuple('Triad', 'src dst cost')


class FrontierQueue:
  def __init__(self):
    self.heap = []             # [cost, seq, triad, alive]
    self.by_dst = defaultdict(list)
    self.counter = itertools.count()
    self.live = 0

  def __len__(self):
    return self.live

  def __bool__(self):
    return self.live > 0

  def insert(self, triad):
    entry = [triad.cost, next(self.counter), triad, True]
    heapq.heappush(self.heap, entry)
    self.by_dst[triad.dst].append(entry)
    self.live += 1

  def entries_for(self, dst):
    return [e[2] for e in self.by_dst.get(dst, ()) if e[3]]

  def contains_entry_for(self, src, dst):
    return any(t.src == src for t in self.entries_for(dst))

  def improves_cost_for(self, dst, cost):
    # True iff no pending entry reaches dst at cost <= cost
    return all(t.cost > cost for t in self.entries_for(dst))

  def _kill(self, entry):
    if entry[3]:
      entry[3] = False
      self.live -= 1

  def replace_with_better(self, triad):
    for entry in self.by_dst.pop(triad.dst, ()):
      self._kill(entry)
    self.insert(triad)

  def remove(self, triad):
    for entry in self.by_dst.get(triad.dst, ()):
      if entry[3] and entry[2] == triad:
        self._kill(entry)
        return True
    return False

  def pop_best_excluding(self, history, remove=False):
    # Lowest cost live entry whose triad is not in history, None if there is none.
    # Entries found in history are skipped but stay in the queue.
    skipped = []
    best = None
    while self.heap:
      entry = self.heap[0]
      if not entry[3]:
        heapq.heappop(self.heap)
        continue
      if entry[2] in history:
        skipped.append(heapq.heappop(self.heap))
        continue
      best = entry[2]
      if remove:
        self._kill(entry)
      break
    for entry in skipped:
      heapq.heappush(self.heap, entry)
    return best

  def ordered(self):
    return [e[2] for e in sorted(e for e in self.heap if e[3])]
