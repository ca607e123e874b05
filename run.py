from crowdchain import create_app

# This is the entry point for the application.
# It creates the Flask app instance using the factory in the crowdchain package.
app = create_app()

if __name__ == '__main__':
    # 'debug=True' allows for hot-reloading when you save changes.
    app.run(host='0.0.0.0', port=app.config['PORT'], debug=True)
