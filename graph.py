"""
undirected weighted graph with a dense (matrix) and a sparse (adjacency list) view

edges come from an adjacency strategy: a callable that takes the node count
and yields (u, v, cost) triples, each unordered pair once.
"""
import numpy as np

MATRIX, ADJ_LIST = 'matrix', 'list'


class GraphError(Exception):
  pass

class OutOfRange(GraphError, IndexError):
  pass

class EdgeNotFound(GraphError, KeyError):
  pass

class RepresentationNotBuilt(GraphError):
  pass


def edge_set(edges):
  # Strategy from an explicit list of (u, v, cost)
  edges = list(edges)
  def strategy(n):
    return iter(edges)
  return strategy

def random_adjacency(density=1.0, max_cost=10.0, seed=None):
  # Every unordered pair becomes an edge with probability density, cost uniform in [0, max_cost)
  if not 0.0 <= density <= 1.0:
    density = 1.0
  def strategy(n):
    rng = np.random.default_rng(seed)
    for u in range(n):
      for v in range(u+1, n):
        if rng.random() < density:
          yield u, v, float(rng.uniform(0.0, max_cost))
  return strategy


class WeightedGraph:
  def __init__(self, n, strategy=None, rep=ADJ_LIST):
    if n < 1:
      raise ValueError("Graph needs at least one node.")
    if rep not in (MATRIX, ADJ_LIST):
      raise ValueError("Unknown representation: %r" % (rep,))
    self.n, self.rep = n, rep
    self.tags = np.zeros(n, dtype=np.int8)
    self.values = np.zeros(n)
    self._present, self._cost = None, None
    self._adj = None
    if strategy is not None:
      self.build(strategy)

  @classmethod
  def from_matrix(cls, present, cost):
    present = np.asarray(present, dtype=bool)
    cost = np.asarray(cost, dtype=float)
    n = len(present)
    if present.shape != (n, n) or cost.shape != (n, n):
      raise ValueError("Matrix must be square.")
    if not (present == present.T).all() or not (cost[present] == cost.T[present]).all():
      raise ValueError("Matrix must be symmetric.")
    if present.diagonal().any():
      raise ValueError("Self loops are not allowed.")
    g = cls(n, rep=MATRIX)
    g._present, g._cost = present.copy(), np.where(present, cost, 0.0)
    return g

  @classmethod
  def from_adjacency(cls, adj):
    g = cls(len(adj), rep=ADJ_LIST)
    g._adj = [list(nbs) for nbs in adj]
    for u in range(g.n):
      for v, w in g._adj[u]:
        g.check_node(v)
        if not g._has_entry(v, u, w):
          raise ValueError("Adjacency must be symmetric.")
    return g

  def _has_entry(self, u, v, w):
    return any(x == v and c == w for x, c in self._adj[u])

  def build(self, strategy):
    # Materialize the preferred representation. Edges never change afterwards.
    if self.is_built():
      return False
    if self.rep == MATRIX:
      present = np.zeros((self.n, self.n), dtype=bool)
      cost = np.zeros((self.n, self.n))
      for u, v, w in strategy(self.n):
        self.check_node(u)
        self.check_node(v)
        if u == v:
          raise ValueError("Self loops are not allowed.")
        if present[u, v]:
          raise ValueError("Duplicate edge %d-%d." % (u, v))
        present[u, v] = present[v, u] = True
        cost[u, v] = cost[v, u] = w
      self._present, self._cost = present, cost
    else:
      adj = [[] for _ in range(self.n)]
      seen = set()
      for u, v, w in strategy(self.n):
        self.check_node(u)
        self.check_node(v)
        if u == v:
          raise ValueError("Self loops are not allowed.")
        if (min(u, v), max(u, v)) in seen:
          raise ValueError("Duplicate edge %d-%d." % (u, v))
        seen.add((min(u, v), max(u, v)))
        adj[u].append((v, w))
        adj[v].append((u, w))
      self._adj = adj
    return True

  def is_built(self):
    return self._adj is not None or self._present is not None

  def has_matrix(self):
    return self._present is not None

  def has_adjacency(self):
    return self._adj is not None

  def derive_matrix_from_list(self):
    if self._present is not None:
      return False
    if self._adj is None:
      raise RepresentationNotBuilt("Adjacency list not built, cannot derive the matrix from it.")
    present = np.zeros((self.n, self.n), dtype=bool)
    cost = np.zeros((self.n, self.n))
    for u, nbs in enumerate(self._adj):
      for v, w in nbs:
        present[u, v] = True
        cost[u, v] = w
    self._present, self._cost = present, cost
    return True

  def derive_list_from_matrix(self):
    if self._adj is not None:
      return False
    if self._present is None:
      raise RepresentationNotBuilt("Matrix not built, cannot derive the adjacency list from it.")
    self._adj = [[(int(v), self._cost[u, v].item()) for v in np.flatnonzero(self._present[u])]
                 for u in range(self.n)]
    return True

  def matrix(self):
    if not self.is_built():
      raise RepresentationNotBuilt("Graph has no representation yet.")
    self.derive_matrix_from_list()
    return self._present, self._cost

  def adjacency(self):
    if not self.is_built():
      raise RepresentationNotBuilt("Graph has no representation yet.")
    self.derive_list_from_matrix()
    return self._adj

  def check_node(self, u):
    if not 0 <= u < self.n:
      raise OutOfRange("Node %s not in [0, %d)." % (u, self.n))

  def vertex_count(self):
    return self.n

  def edge_count(self):
    if self._adj is not None:
      return sum(len(nbs) for nbs in self._adj) // 2
    if self._present is not None:
      return int(self._present.sum()) // 2
    raise RepresentationNotBuilt("Graph has no representation yet.")

  def are_adjacent(self, u, v):
    self.check_node(u)
    self.check_node(v)
    if self._adj is not None:
      return any(x == v for x, _ in self._adj[u])
    if self._present is not None:
      return bool(self._present[u, v])
    raise RepresentationNotBuilt("Graph has no representation yet.")

  def neighbors_of(self, u):
    self.check_node(u)
    if self._adj is not None:
      return list(self._adj[u])
    if self._present is not None:
      return [(int(v), self._cost[u, v].item()) for v in np.flatnonzero(self._present[u])]
    raise RepresentationNotBuilt("Graph has no representation yet.")

  def edge_cost(self, u, v):
    self.check_node(u)
    self.check_node(v)
    if self._adj is not None:
      for x, w in self._adj[u]:
        if x == v:
          return w
    elif self._present is not None:
      if self._present[u, v]:
        return self._cost[u, v].item()
    else:
      raise RepresentationNotBuilt("Graph has no representation yet.")
    raise EdgeNotFound("No edge between %d and %d." % (u, v))

  def get_tag(self, u):
    self.check_node(u)
    return int(self.tags[u])

  def set_tag(self, u, tag):
    self.check_node(u)
    self.tags[u] = tag

  def get_value(self, u):
    self.check_node(u)
    return self.values[u].item()

  def set_value(self, u, val):
    self.check_node(u)
    self.values[u] = val

  def nodes_tagged(self, tags):
    # Indices of the nodes whose tag is one of tags
    return set(np.flatnonzero(np.isin(self.tags, list(tags))).tolist())

  def copy(self):
    # Tags and values are per copy, the edge structure is shared (it is never mutated)
    g = self.__class__.__new__(self.__class__)
    g.__dict__.update(self.__dict__)
    g.tags = self.tags.copy()
    g.values = self.values.copy()
    return g

  def format_matrix(self):
    present, cost = self.matrix()
    out = '      ' + ''.join('%10d:' % j for j in range(self.n)) + '\n'
    for i in range(self.n):
      out += '%4d: ' % i
      out += ''.join(' %d(%8.3f)' % (present[i, j], cost[i, j]) for j in range(self.n))
      out += '\n'
    return out

  def format_adjacency(self):
    lines = []
    for u, nbs in enumerate(self.adjacency()):
      lines.append('Node %d: ' % u + ', '.join('%d(%g)' % (v, w) for v, w in nbs))
    return '\n'.join(lines)
