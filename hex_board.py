"""
hex board: a weighted graph on L*L cells with the rhombic hex adjacency

index positions for     board:    0 1 2       <- row 0
                                   3 4 5       <- row 1
                                    6 7 8       <- row 2

x (player 1) connects top and bottom, o (player 2) connects left and right
"""
import math

import numpy as np

from graph import WeightedGraph, OutOfRange, ADJ_LIST

PTS = '.xo'
EMPTY, BLACK, WHITE = 0, 1, 2
BCH, WCH = PTS[BLACK], PTS[WHITE]


def opponent(tag):
  if tag == BLACK: return WHITE
  elif tag == WHITE: return BLACK
  raise ValueError("No opponent for tag %r." % (tag,))

def coord_to_point(r, c, C):
  return c + r*C

def point_to_coord(p, C):
  return divmod(p, C)

def point_to_alphanum(p, C):
  r, c = point_to_coord(p, C)
  return chr(ord('a') + c) + str(r + 1)

def alphanum_to_point(an, C):
  return (ord(an[0]) - ord('a')) + (int(an[1:])-1)*C

escape_ch           = '\033['
colorend, textcolor = escape_ch + '0m', escape_ch + '0;37m'
stonecolors         = (textcolor, escape_ch + '0;35m', escape_ch + '0;32m')


def hex_adjacency(n):
  # Cell (r, c) touches (r-1, c), (r-1, c+1), (r, c-1), (r, c+1), (r+1, c-1), (r+1, c), all with cost 1
  L = math.isqrt(n)
  if L*L != n:
    raise ValueError("Hex adjacency needs a square node count, got %d." % n)
  for r in range(L):
    for c in range(L):
      p = coord_to_point(r, c, L)
      if c < L-1:           yield p, coord_to_point(r,   c+1, L), 1
      if r < L-1 and c > 0: yield p, coord_to_point(r+1, c-1, L), 1
      if r < L-1:           yield p, coord_to_point(r+1, c,   L), 1


class HexBoard(WeightedGraph):
  def __init__(self, L, rep=ADJ_LIST):
    if L < 1:
      raise ValueError("Board border length must be positive.")
    super().__init__(L*L, hex_adjacency, rep)
    self.L = L

    self.TOP_ROW = [coord_to_point(0,   c, L) for c in range(L)]
    self.BTM_ROW = [coord_to_point(L-1, c, L) for c in range(L)]
    self.LFT_COL = [coord_to_point(r, 0,   L) for r in range(L)]
    self.RGT_COL = [coord_to_point(r, L-1, L) for r in range(L)]

  def coord_to_point(self, r, c):
    if not (0 <= r < self.L and 0 <= c < self.L):
      raise OutOfRange("Coordinate (%s, %s) off a %dx%d board." % (r, c, self.L, self.L))
    return coord_to_point(r, c, self.L)

  def point_to_coord(self, p):
    if not 0 <= p < self.n:
      raise OutOfRange("Index %s off a %dx%d board." % (p, self.L, self.L))
    return point_to_coord(p, self.L)

  def tag_at(self, r, c):
    return self.get_tag(self.coord_to_point(r, c))

  def set_tag_at(self, r, c, tag):
    self.set_tag(self.coord_to_point(r, c), tag)

  def value_at(self, r, c):
    return self.get_value(self.coord_to_point(r, c))

  def set_value_at(self, r, c, val):
    self.set_value(self.coord_to_point(r, c), val)

  def apply_move(self, r, c, tag):
    # No occupancy check, the turn loop validates before calling
    self.set_tag_at(r, c, tag)

  def empty_cells(self):
    return np.flatnonzero(self.tags == EMPTY).tolist()

  def stones(self, tag):
    return np.flatnonzero(self.tags == tag).tolist()

  def board_str(self, color=False):
    def paint(s, ch=None):
      if not color:
        return s
      if ch is not None:
        return stonecolors[PTS.find(ch)] + s + colorend
      return textcolor + s + colorend

    pretty = '\n  '
    for c in range(self.L):
      pretty += ' ' + paint(chr(ord('a')+c))
    pretty += '\n  + '
    for c in range(self.L):
      pretty += paint(BCH, BCH) + ' '
    pretty += '+\n'
    for r in range(self.L):
      n = str(1+r)
      pretty += ' '*r + ' '*(2-len(n)) + paint(n) + ' ' + paint(WCH, WCH)
      for c in range(self.L):
        ch = PTS[self.tags[coord_to_point(r, c, self.L)]]
        pretty += ' ' + paint(ch, ch)
      pretty += ' ' + paint(WCH, WCH) + '\n'
    pretty += '   ' + ' '*self.L + '+'
    for c in range(self.L):
      pretty += ' ' + paint(BCH, BCH)
    pretty += ' +\n'
    return pretty

  def showboard(self):
    print(self.board_str(color=True))
