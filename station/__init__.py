"""
Voicenote Station web service: public upload intake, staff review API and
live dashboard updates.
"""
