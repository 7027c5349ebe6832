"""dearpygui front end for the cache map."""
