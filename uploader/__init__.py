"""
Bulk episode uploader.

Drives the podcast host's "new episode" page in a real browser, one audio
file at a time: attach, wait for the upload, fill title and description,
then Next and Publish. The first failure stops the batch.
"""
