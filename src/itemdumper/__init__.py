"""
itemdumper - Game cache item dumper

Loads item definitions from a cache archive, links their noted, bought and
placeholder variants, and writes per-item JSON snapshots plus generated
ItemID / NullItemID constant tables.
"""

__version__ = "0.1.0"
__author__ = "itemdumper contributors"
