"""decide2watch: pick something to watch by running a single-elimination bracket.

The bracket engine and tournament controller live in ``decide2watch.core``;
the TMDB catalog client that supplies candidate items lives in
``decide2watch.services``.
"""
