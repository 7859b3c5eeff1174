"""
End-to-end walkthrough runner.
"""
