from expense_api import create_app

app = create_app()

if __name__ == "__main__":
    app.logger.info("Starting expense API on %s:%s", app.config["HOST"], app.config["PORT"])
    app.run(host=app.config["HOST"], port=app.config["PORT"], debug=app.config["DEBUG"])
