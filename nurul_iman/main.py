from nurul_iman.bootstrap import create_app

app = create_app()
