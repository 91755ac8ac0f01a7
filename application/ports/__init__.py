"""Application ports: primary (driving) and secondary (driven) interfaces."""
