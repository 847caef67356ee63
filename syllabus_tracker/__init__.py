"""Find deadlines in syllabus PDFs and show the upcoming ones."""

__version__ = "0.1.0"
