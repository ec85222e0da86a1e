"""
spinup.provisioning

Provisioning building blocks.

Responsibilities:
- Port allocation, compose rendering, container launch, DNS client.
- Request/response models and the error taxonomy shared by all layers.
"""

# Package marker; also the anchor for the bundled compose templates.
