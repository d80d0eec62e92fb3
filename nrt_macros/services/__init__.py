"""Engine services: document assembly, macro execution and auto-detection."""
