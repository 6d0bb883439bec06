"""
Courses Package

Minimal course and enrollment data consumed by the quiz engine. Course
management itself lives outside this application; only the fields the
engine reads are modelled here.
"""
