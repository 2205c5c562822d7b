"""
single source, single target dijkstra over a WeightedGraph

nodes whose tag is in the banned set are treated as absent. a failed search is a
normal outcome: seek_path returns False and path()/path_cost() return None.
"""
from collections import defaultdict

from frontier import FrontierQueue, Triad
from graph import GraphError


class NotComputedYet(GraphError):
  pass


class PathFinder:
  def __init__(self, graph):
    self.graph = graph
    self.sought = False
    self.reset()

  def reset(self):
    self.src, self.dst = None, None
    self.exists = False
    self.used = []
    self.steps = None
    self.cost = None

  def seek_path(self, src, dst, banned_tags=(), exhaustive=True):
    # exhaustive: after the target is first taken off the frontier keep settling the
    # remaining entries until the frontier runs dry. the reported path is the same
    # either way, exhaustive=False stops as soon as the target is reached.
    g = self.graph
    g.check_node(src)
    g.check_node(dst)
    self.reset()
    self.sought = True
    self.src, self.dst = src, dst

    banned = g.nodes_tagged(banned_tags) if banned_tags else set()
    if src in banned or dst in banned:
      return False
    if src == dst:
      self.exists, self.steps, self.cost = True, [], 0
      return True

    costs = {src: 0}
    closed = {src}
    used, used_set = self.used, set()
    queue = FrontierQueue()
    reached = False
    current = src
    while True:
      for nb, w in g.neighbors_of(current):
        if nb in closed or nb in banned:
          continue
        triad = Triad(current, nb, costs[current] + w)
        if not queue.contains_entry_for(current, nb) and queue.improves_cost_for(nb, triad.cost):
          queue.replace_with_better(triad)

      top = queue.pop_best_excluding(used_set)
      if top is None:
        break
      used.append(top)
      used_set.add(top)
      if top.dst != dst:
        queue.remove(top)
        closed.add(top.dst)
        costs[top.dst] = top.cost
        current = top.dst
        continue

      # target stays open and its entry stays queued, it is only marked used
      reached = True
      costs[dst] = top.cost
      if not exhaustive:
        break
      nxt = queue.pop_best_excluding(used_set)
      if nxt is None:
        break
      current = nxt.src

    self.exists = reached
    if reached:
      self.reconstruct()
    return reached

  def reconstruct(self):
    # Walk back from the target through the cheapest used triad arriving at each node
    arriving = defaultdict(list)
    for t in self.used:
      arriving[t.dst].append(t)
    raw = []
    node = self.dst
    while node != self.src:
      t = min(arriving[node], key=lambda t: t.cost)
      raw.append(t)
      node = t.src
    raw.reverse()
    self.steps, prev = [], 0
    for t in raw:
      self.steps.append((t.dst, t.cost - prev))
      prev = t.cost
    self.cost = raw[-1].cost

  def check_sought(self):
    if not self.sought:
      raise NotComputedYet("seek_path has not been called yet.")

  def path_exists(self):
    self.check_sought()
    return self.exists

  def path(self):
    # [(node, cost of the step into node), ...] from src (exclusive) to dst, None if no path
    self.check_sought()
    return list(self.steps) if self.exists else None

  def path_cost(self):
    self.check_sought()
    return self.cost if self.exists else None

  def path_nodes(self):
    self.check_sought()
    if not self.exists:
      return None
    return [self.src] + [v for v, _ in self.steps]

  def format_path(self):
    self.check_sought()
    if not self.exists:
      return 'no path from %d to %d' % (self.src, self.dst)
    out = '%d (0)' % self.src
    for v, w in self.steps:
      out += ' -> %d (%g)' % (v, w)
    return out + '\ntotal cost: %g' % self.cost
