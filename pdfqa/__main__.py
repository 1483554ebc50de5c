from pdfqa.main import run

run()
