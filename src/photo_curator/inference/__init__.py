"""Adapters around the object detector and face attribute models."""
