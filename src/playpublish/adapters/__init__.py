"""Adapters connecting the publishing core to Google Play and the local filesystem."""
