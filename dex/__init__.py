"""dex/ - Aggregator access for SWAPSIM."""
