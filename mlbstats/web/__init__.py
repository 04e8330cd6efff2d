from .mlbstats_api import server as server
