"""Host interfaces for PromptPad."""
