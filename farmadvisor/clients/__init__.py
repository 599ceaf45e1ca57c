"""
HTTP clients for the dataset store and the crop-recommendation service.
"""
