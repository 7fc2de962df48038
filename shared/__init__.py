"""
Shared models, configuration, stores and the live update channel.
"""
