"""Runtime services shared by the composition core."""
