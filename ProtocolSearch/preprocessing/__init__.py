"""
Preprocessing module for turning protocol text into search tokens.
Includes tokenization, short token removal and stop word filtering.
"""
