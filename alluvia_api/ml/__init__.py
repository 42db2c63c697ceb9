"""Model loading and inference utilities.

- features.py: side-car loaders and feature-vector assembly
- scoring.py: scorers wrapping the serialized model artifacts
- outputs.py: probability / value extraction from raw model outputs
- engine.py: the two prediction services and their lazy holders
"""
