from src.ward_board.ward_board.main import create_app

app = create_app()

if __name__ == "__main__":
    app.run(debug=bool(app.config.get("DEBUG")), threaded=True)
