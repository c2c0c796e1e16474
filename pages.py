HOME_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Banking System</title>
    <style>
        body {
            font-family: Arial, sans-serif;
            background: #1d3557 url('/static/bg.jpg') no-repeat center center fixed;
            background-size: cover;
            color: white;
            text-align: center;
            margin: 0;
        }
        .container { display: flex; flex-direction: column; align-items: center; margin-top: 20px; }
        .card {
            background: rgba(255, 255, 255, 0.2);
            border-radius: 10px;
            width: 350px;
            margin: 10px;
            backdrop-filter: blur(10px);
        }
        .card-header {
            background: rgba(0, 123, 255, 0.7);
            padding: 10px;
            cursor: pointer;
            border-radius: 10px 10px 0 0;
            font-weight: bold;
        }
        .card-content { display: none; padding: 15px; }
        .card.active .card-content { display: block; }
        input, select, button { margin: 8px 0; padding: 10px; width: 95%; border-radius: 5px; border: 1px solid #ddd; }
        button { background-color: rgba(45, 220, 255, 0.8); color: white; border: none; cursor: pointer; }
        #resultModal {
            display: none;
            position: fixed;
            left: 50%;
            top: 50%;
            transform: translate(-50%, -50%);
            background: rgba(255, 255, 255, 0.9);
            color: black;
            padding: 20px;
            border-radius: 10px;
        }
        @media (max-width: 768px) { .card { width: 90%; } }
    </style>
</head>
<body>
    <h2>Welcome to Your Bank</h2>
    <div class="container">
        <div class="card">
            <div class="card-header" onclick="toggleCard(this)">Create Account</div>
            <div class="card-content">
                <form onsubmit="return handleSubmit(event, '/create')">
                    <input type="text" name="name" placeholder="Full Name" required>
                    <input type="number" step="0.01" name="balance" placeholder="Initial Balance" required>
                    <select name="accountType">
                        <option value="Savings">Savings</option>
                        <option value="Current">Current</option>
                    </select>
                    <button type="submit">Create</button>
                </form>
            </div>
        </div>
        <div class="card">
            <div class="card-header" onclick="toggleCard(this)">Deposit Money</div>
            <div class="card-content">
                <form onsubmit="return handleSubmit(event, '/deposit')">
                    <input type="text" name="name" placeholder="Account Name" required>
                    <input type="number" step="0.01" name="amount" placeholder="Amount" required>
                    <button type="submit">Deposit</button>
                </form>
            </div>
        </div>
        <div class="card">
            <div class="card-header" onclick="toggleCard(this)">Withdraw Money</div>
            <div class="card-content">
                <form onsubmit="return handleSubmit(event, '/withdraw')">
                    <input type="text" name="name" placeholder="Account Name" required>
                    <input type="number" step="0.01" name="amount" placeholder="Amount" required>
                    <button type="submit">Withdraw</button>
                </form>
            </div>
        </div>
        <div class="card">
            <div class="card-header" onclick="toggleCard(this)">Check Balance</div>
            <div class="card-content">
                <form onsubmit="return lookup(event, '/balance', 'balanceName')">
                    <input type="text" id="balanceName" placeholder="Account Name" required>
                    <button type="submit">Check</button>
                </form>
            </div>
        </div>
        <div class="card">
            <div class="card-header" onclick="toggleCard(this)">Transaction History</div>
            <div class="card-content">
                <form onsubmit="return lookup(event, '/history', 'historyName')">
                    <input type="text" id="historyName" placeholder="Account Name" required>
                    <button type="submit">View</button>
                </form>
            </div>
        </div>
    </div>

    <div id="resultModal"></div>

    <script>
        function handleSubmit(event, url) {
            event.preventDefault();
            fetch(url, { method: 'POST', body: new URLSearchParams(new FormData(event.target)) })
                .then(res => res.text())
                .then(showModal);
        }

        function lookup(event, url, inputId) {
            event.preventDefault();
            const name = document.getElementById(inputId).value;
            fetch(url + '?name=' + encodeURIComponent(name))
                .then(res => res.text())
                .then(showModal);
        }

        function showModal(message) {
            const modal = document.getElementById('resultModal');
            modal.innerHTML = '<h3>Notification</h3><p>' + message + '</p>';
            modal.style.display = 'block';
            setTimeout(() => modal.style.display = 'none', 5000);
        }

        function toggleCard(header) {
            header.parentElement.classList.toggle('active');
        }
    </script>
</body>
</html>
"""
