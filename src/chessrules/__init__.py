"""chessrules: a chess rules engine.

Board representation, legal move generation, reversible move application,
checkmate / stalemate / draw adjudication and FEN / UCI / SAN notation.
"""
