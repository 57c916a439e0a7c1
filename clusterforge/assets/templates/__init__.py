"""Packaged template files (bootkube manifests, dnsmasq and cloud provider configuration)."""
